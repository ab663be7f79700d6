"""FastAPI-based web UI for the subtitle tool."""

from __future__ import annotations

import html
import pathlib
import shutil
import uuid
from typing import Optional

from celery import states
from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse, PlainTextResponse

from .config import CLAMP_OVERLAPS
from .tasks import SUBTITLE_ROOT, UPLOAD_ROOT, load_metadata, transcribe_job, write_metadata

app = FastAPI(title="Audio to SRT Converter")

SUPPORTED_FORMATS_LABEL = "WAV, MP3, AIFF, AAC, OGG, FLAC"


def _render_form(*, message: Optional[str] = None) -> HTMLResponse:
    message_block = (
        f"<p class=\"message\" id=\"status-message\">{html.escape(message)}</p>"
        if message
        else "<p class=\"message\" id=\"status-message\"></p>"
    )
    body = f"""
    <!DOCTYPE html>
    <html lang=\"en\">
    <head>
        <meta charset=\"utf-8\" />
        <title>Audio to SRT Converter</title>
        <style>
            body {{ font-family: Arial, sans-serif; margin: 2rem; }}
            form {{ display: grid; gap: 0.75rem; max-width: 28rem; }}
            label {{ display: block; font-weight: bold; margin-bottom: 0.25rem; }}
            input[type="file"] {{ padding: 0.5rem 0; }}
            .message {{ color: #d00; font-weight: bold; }}
            .hint {{ color: #666; font-size: 0.9rem; }}
            progress {{ width: 100%; height: 1.5rem; }}
            .status-container {{ max-width: 28rem; margin-top: 1rem; }}
            .result-container {{ margin-top: 1rem; max-width: 48rem; }}
            pre {{ background: #f6f6f6; padding: 1rem; max-height: 24rem; overflow: auto; }}
            button[disabled] {{ opacity: 0.6; cursor: not-allowed; }}
        </style>
    </head>
    <body>
        <h1>Audio to SRT Converter</h1>
        {message_block}
        <form id=\"upload-form\" enctype=\"multipart/form-data\">
            <label for=\"file\">Audio file</label>
            <input id=\"file\" name=\"file\" type=\"file\" accept=\"audio/*\" required />
            <p class=\"hint\">Supported formats: {SUPPORTED_FORMATS_LABEL}</p>
            <label><input type=\"checkbox\" name=\"clamp_overlaps\" value=\"1\" {'checked' if CLAMP_OVERLAPS else ''} /> Trim overlapping segments</label>
            <button type=\"submit\" id=\"convert-btn\">Convert to SRT</button>
        </form>
        <div class=\"status-container\">
            <progress id=\"progress\" value=\"0\" max=\"100\"></progress>
            <p id=\"status-detail\"></p>
        </div>
        <div class=\"result-container\">
            <pre id=\"srt-preview\" hidden></pre>
            <button type=\"button\" id=\"copy-btn\" disabled>Copy to clipboard</button>
            <button type=\"button\" id=\"download-btn\" disabled>Download SRT</button>
        </div>
        <script>
        (() => {{
            const form = document.getElementById('upload-form');
            const convertBtn = document.getElementById('convert-btn');
            const progressBar = document.getElementById('progress');
            const statusMessage = document.getElementById('status-message');
            const statusDetail = document.getElementById('status-detail');
            const preview = document.getElementById('srt-preview');
            const copyBtn = document.getElementById('copy-btn');
            const downloadBtn = document.getElementById('download-btn');

            let pollHandle = null;
            let subtitleUrl = null;

            const stopPolling = () => {{
                if (pollHandle) {{
                    clearInterval(pollHandle);
                    pollHandle = null;
                }}
            }};

            const resetResult = () => {{
                subtitleUrl = null;
                preview.textContent = '';
                preview.hidden = true;
                copyBtn.disabled = true;
                downloadBtn.disabled = true;
            }};

            const showResult = async (data) => {{
                const response = await fetch(data.subtitle_text_url);
                if (!response.ok) {{
                    throw new Error('Failed to load subtitles');
                }}
                preview.textContent = await response.text();
                preview.hidden = false;
                subtitleUrl = data.subtitle_url;
                copyBtn.disabled = false;
                downloadBtn.disabled = false;
            }};

            const pollStatus = async (taskId) => {{
                try {{
                    const response = await fetch(`/api/status/${{taskId}}`);
                    if (response.status === 404) {{
                        stopPolling();
                        convertBtn.disabled = false;
                        statusMessage.textContent = 'Task not found.';
                        return;
                    }}
                    if (!response.ok) {{
                        throw new Error('Failed to fetch status');
                    }}
                    const data = await response.json();
                    progressBar.value = data.progress ?? 0;
                    statusDetail.textContent = data.message || data.status;
                    if (data.status === 'completed') {{
                        stopPolling();
                        convertBtn.disabled = false;
                        statusMessage.textContent = `Created ${{data.segment_count}} subtitles.`;
                        await showResult(data);
                    }} else if (data.status === 'error') {{
                        stopPolling();
                        convertBtn.disabled = false;
                        statusMessage.textContent = data.message || 'Failed to process audio. Please try again.';
                    }} else {{
                        statusMessage.textContent = 'Converting...';
                    }}
                }} catch (error) {{
                    stopPolling();
                    convertBtn.disabled = false;
                    statusMessage.textContent = error.message;
                }}
            }};

            form.addEventListener('submit', async (event) => {{
                event.preventDefault();
                const formData = new FormData(form);
                stopPolling();
                resetResult();
                progressBar.value = 0;
                statusMessage.textContent = 'Uploading...';
                statusDetail.textContent = '';
                convertBtn.disabled = true;

                try {{
                    const response = await fetch('/api/transcribe', {{
                        method: 'POST',
                        body: formData,
                    }});
                    if (!response.ok) {{
                        const errorText = await response.text();
                        throw new Error(errorText || 'Failed to start conversion');
                    }}
                    const data = await response.json();
                    statusMessage.textContent = 'Task started...';
                    pollStatus(data.task_id);
                    pollHandle = setInterval(() => pollStatus(data.task_id), 2000);
                }} catch (error) {{
                    convertBtn.disabled = false;
                    statusMessage.textContent = error.message;
                }}
            }});

            copyBtn.addEventListener('click', async () => {{
                await navigator.clipboard.writeText(preview.textContent);
                copyBtn.textContent = 'Copied!';
                setTimeout(() => {{ copyBtn.textContent = 'Copy to clipboard'; }}, 2000);
            }});

            downloadBtn.addEventListener('click', () => {{
                if (subtitleUrl) {{
                    window.location.href = subtitleUrl;
                }}
            }});
        }})();
        </script>
    </body>
    </html>
    """
    return HTMLResponse(content=body)


@app.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    return _render_form()


def _metadata_path(task_id: str) -> pathlib.Path:
    return UPLOAD_ROOT / task_id / "metadata.json"


def _load_task(task_id: str) -> dict:
    # Task ids are generated hex strings; anything else cannot name a job directory.
    if not task_id.isalnum():
        raise HTTPException(status_code=404, detail="Task not found")
    metadata_path = _metadata_path(task_id)
    if not metadata_path.exists():
        raise HTTPException(status_code=404, detail="Task not found")
    return load_metadata(metadata_path)


def _merge_celery_state(task_id: str, meta: dict) -> dict:
    if meta.get("status") in {"completed", "error"}:
        return meta
    result = transcribe_job.AsyncResult(task_id)
    if result.state == states.SUCCESS and isinstance(result.info, dict):
        return {**meta, **result.info}
    if result.state == states.FAILURE:
        info = result.info if isinstance(result.info, dict) else {}
        return {
            **meta,
            "status": "error",
            "progress": 100,
            "message": info.get("message") or "Failed to process audio. Please try again.",
            "subtitle_ready": False,
        }
    if result.state == "PROGRESS" and isinstance(result.info, dict):
        return {**meta, "status": "processing", **result.info}
    return meta


def _task_payload(task_id: str, meta: dict) -> dict[str, object]:
    subtitle_ready = bool(meta.get("subtitle_ready"))
    return {
        "task_id": task_id,
        "status": meta.get("status", "queued"),
        "progress": meta.get("progress", 0),
        "message": meta.get("message"),
        "filename": meta.get("filename"),
        "segment_count": meta.get("segment_count"),
        "subtitle_ready": subtitle_ready,
        "subtitle_filename": meta.get("subtitle_filename") if subtitle_ready else None,
        "subtitle_url": f"/api/download/{task_id}" if subtitle_ready else None,
        "subtitle_text_url": f"/api/subtitle/{task_id}" if subtitle_ready else None,
    }


def _subtitle_file(task_id: str) -> pathlib.Path:
    meta = _merge_celery_state(task_id, _load_task(task_id))
    subtitle_path = meta.get("subtitle_path")
    if not meta.get("subtitle_ready") or not subtitle_path:
        raise HTTPException(status_code=404, detail="Subtitle not available")
    subtitle_file = pathlib.Path(subtitle_path)
    if not subtitle_file.exists():
        raise HTTPException(status_code=404, detail="Subtitle not available")
    return subtitle_file


@app.post("/api/transcribe")
async def queue_transcription(
    file: UploadFile = File(...),
    clamp_overlaps: bool = Form(CLAMP_OVERLAPS),
) -> JSONResponse:
    if not file.filename:
        raise HTTPException(status_code=400, detail="Missing file name")

    mime_type = file.content_type or ""
    if not mime_type.startswith("audio/"):
        raise HTTPException(status_code=400, detail="Please upload an audio file")

    task_id = uuid.uuid4().hex
    job_dir = UPLOAD_ROOT / task_id
    job_dir.mkdir(parents=True, exist_ok=True)

    safe_name = pathlib.Path(file.filename).name or "upload"
    input_path = job_dir / safe_name
    with input_path.open("wb") as destination:
        shutil.copyfileobj(file.file, destination)
    file.file.close()

    subtitle_path = SUBTITLE_ROOT / task_id / f"{input_path.stem or 'subtitles'}.srt"
    metadata_path = _metadata_path(task_id)
    write_metadata(
        metadata_path,
        {
            "status": "queued",
            "progress": 0,
            "message": "Task queued",
            "filename": safe_name,
            "mime_type": mime_type,
            "clamp_overlaps": clamp_overlaps,
            "subtitle_ready": False,
        },
    )

    payload = {
        "task_id": task_id,
        "input_path": str(input_path),
        "mime_type": mime_type,
        "metadata_path": str(metadata_path),
        "subtitle_path": str(subtitle_path),
        "clamp_overlaps": clamp_overlaps,
    }
    transcribe_job.apply_async(args=[payload], task_id=task_id)

    return JSONResponse({"task_id": task_id})


@app.get("/api/status/{task_id}")
async def get_status(task_id: str) -> JSONResponse:
    meta = _merge_celery_state(task_id, _load_task(task_id))
    return JSONResponse(_task_payload(task_id, meta))


@app.get("/api/subtitle/{task_id}")
async def subtitle_text(task_id: str) -> PlainTextResponse:
    subtitle_file = _subtitle_file(task_id)
    return PlainTextResponse(subtitle_file.read_text(encoding="utf-8"))


@app.get("/api/download/{task_id}")
async def download_subtitle(task_id: str) -> FileResponse:
    subtitle_file = _subtitle_file(task_id)
    return FileResponse(
        subtitle_file,
        media_type="application/x-subrip",
        filename=subtitle_file.name,
    )
