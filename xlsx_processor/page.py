"""
The upload form served at "/".

The script posts to /process, keeps the button disabled until the response
arrives, then either shows the error detail or the row counts and saves the
returned workbook.
"""

INDEX_HTML = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>XLSX Processor</title>
  <style>
    body { font-family: sans-serif; background: #f9fafb; margin: 0; padding: 3rem 1rem; }
    main { max-width: 42rem; margin: 0 auto; background: #fff; border-radius: .5rem;
           box-shadow: 0 2px 8px rgba(0,0,0,.1); padding: 1.5rem; }
    h1 { text-align: center; margin-top: 0; }
    label { display: block; font-weight: 600; margin: 1rem 0 .5rem; }
    textarea { width: 100%; box-sizing: border-box; }
    button { width: 100%; margin-top: 1.5rem; padding: .6rem; border: 0; border-radius: .375rem;
             color: #fff; background: #2563eb; cursor: pointer; }
    button:disabled { background: #9ca3af; cursor: not-allowed; }
    .error { background: #fef2f2; color: #b91c1c; padding: 1rem; margin-top: 1rem; }
    .result { background: #f0fdf4; color: #15803d; padding: 1rem; margin-top: 1rem; }
    [hidden] { display: none; }
  </style>
</head>
<body>
<main>
  <h1>XLSX Processor</h1>
  <p>Upload a spreadsheet and list the identifiers whose rows should be removed.</p>

  <label for="file">Spreadsheet</label>
  <input id="file" type="file" accept=".xlsx,.xls">

  <label for="identifiers">Identifiers (one per line)</label>
  <textarea id="identifiers" rows="5" placeholder="Type the identifiers here..."></textarea>

  <button id="process" type="button">Process and download</button>

  <div id="error" class="error" hidden></div>
  <div id="result" class="result" hidden>
    <p>&#10003; File processed successfully!</p>
    <ul>
      <li>Original rows: <span id="total"></span></li>
      <li>Removed rows: <span id="removed"></span></li>
      <li>Remaining rows: <span id="remaining"></span></li>
    </ul>
  </div>
</main>
<script>
const button = document.getElementById("process");
const errorBox = document.getElementById("error");
const resultBox = document.getElementById("result");

function download(file) {
  const bytes = Uint8Array.from(atob(file.content_b64), c => c.charCodeAt(0));
  const url = URL.createObjectURL(new Blob([bytes], { type: file.media_type }));
  const link = document.createElement("a");
  link.href = url;
  link.download = file.filename;
  link.click();
  URL.revokeObjectURL(url);
}

button.addEventListener("click", async () => {
  const form = new FormData();
  const file = document.getElementById("file").files[0];
  if (file) form.append("file", file);
  form.append("identifiers", document.getElementById("identifiers").value);

  button.disabled = true;
  button.textContent = "Processing...";
  errorBox.hidden = true;

  try {
    const response = await fetch("process", { method: "POST", body: form });
    const data = await response.json();
    if (!response.ok) {
      errorBox.textContent = typeof data.detail === "string" ? data.detail : "Could not process the file.";
      errorBox.hidden = false;
      return;
    }
    download(data.processed_file);
    document.getElementById("total").textContent = data.summary.total_rows;
    document.getElementById("removed").textContent = data.summary.removed_rows;
    document.getElementById("remaining").textContent = data.summary.remaining_rows;
    resultBox.hidden = false;
  } catch (err) {
    errorBox.textContent = "Could not process the file.";
    errorBox.hidden = false;
  } finally {
    button.disabled = false;
    button.textContent = "Process and download";
  }
});
</script>
</body>
</html>
"""
