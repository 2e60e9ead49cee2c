#!/usr/bin/env python3
"""
PDF Toolbox - Flask Web Application

A local web interface for merging, splitting, compressing and reading PDFs.
Processing runs in background jobs; the page polls for progress and then
downloads the result.
"""

import io
import os
import tempfile
import threading
import time
import uuid
from pathlib import Path
from typing import Dict, Optional, Tuple

from flask import (
    Flask,
    jsonify,
    render_template,
    request,
    send_file,
    session,
)
from flask_cors import CORS
from werkzeug.utils import secure_filename

# Add parent directory to path to import pdftoolbox
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from pdftoolbox import (
    JobManager,
    MergeQueue,
    PDFAnalyzer,
    SourceFile,
    compress_pdf,
    extract_text,
    merge_pdfs,
    pdf_text_stats,
    run_stats,
    split_pdf,
)
from pdftoolbox.utils import allowed_file, format_size

app = Flask(__name__)
app.secret_key = os.urandom(24)
CORS(app)

# Configuration
app.config["UPLOAD_FOLDER"] = str(Path(tempfile.gettempdir()) / "pdftoolbox_uploads")
app.config["MAX_CONTENT_LENGTH"] = 500 * 1024 * 1024  # 500MB max upload
app.config["ALLOWED_EXTENSIONS"] = ["pdf"]
app.config["UPLOAD_MAX_AGE_HOURS"] = 1
app.config["JOB_WORKERS"] = 4
app.config.from_prefixed_env("PDFTOOLBOX")

# Job tracking
job_manager = JobManager(max_workers=int(app.config["JOB_WORKERS"]))

# Merge queues, one per browser session
merge_queues: Dict[str, MergeQueue] = {}
merge_queues_lock = threading.Lock()

FILE_TOOLS = {
    "split": split_pdf,
    "compress": compress_pdf,
    "extract-text": extract_text,
    "stats/pdf": pdf_text_stats,
}


def upload_folder() -> Path:
    folder = Path(app.config["UPLOAD_FOLDER"])
    folder.mkdir(parents=True, exist_ok=True)
    return folder


def is_pdf(filename: str) -> bool:
    return allowed_file(filename, app.config["ALLOWED_EXTENSIONS"])


def cleanup_old_files(max_age_hours: Optional[float] = None):
    """Clean up uploads, finished jobs and idle merge queues older than max_age_hours."""
    if max_age_hours is None:
        max_age_hours = app.config["UPLOAD_MAX_AGE_HOURS"]
    now = time.time()
    max_age_seconds = max_age_hours * 3600

    for file_path in upload_folder().iterdir():
        if file_path.is_file():
            age = now - file_path.stat().st_mtime
            if age > max_age_seconds:
                try:
                    file_path.unlink()
                except OSError as e:
                    app.logger.warning("Could not remove %s: %s", file_path, e)

    job_manager.prune(max_age_seconds)

    with merge_queues_lock:
        idle = [
            queue_id for queue_id, queue in merge_queues.items()
            if now - queue.last_used > max_age_seconds
        ]
        for queue_id in idle:
            del merge_queues[queue_id]
    if idle:
        app.logger.info("Dropped %d idle merge queues", len(idle))


def session_merge_queue() -> MergeQueue:
    """Merge queue of the current browser session."""
    queue_id = session.get("merge_queue_id")
    if queue_id is None:
        queue_id = str(uuid.uuid4())
        session["merge_queue_id"] = queue_id

    with merge_queues_lock:
        queue = merge_queues.setdefault(queue_id, MergeQueue())
        queue.touch()
        return queue


def merge_queue_response(queue: MergeQueue):
    return jsonify({
        "files": queue.to_list(),
        "count": len(queue),
        "can_merge": queue.can_merge,
    })


def load_upload(data: Optional[dict]) -> Tuple[Optional[SourceFile], Optional[tuple]]:
    """Resolve an uploaded file from a ``file_id``/``filename`` request body."""
    if not data or not isinstance(data, dict):
        return None, (jsonify({"error": "No data provided"}), 400)

    file_id = data.get("file_id")
    filename = data.get("filename")

    if not all([file_id, filename]):
        return None, (jsonify({"error": "Missing required fields"}), 400)

    file_path = upload_folder() / secure_filename(f"{file_id}_{filename}")
    if not file_path.exists():
        return None, (jsonify({"error": "File not found. Please upload again."}), 404)

    return SourceFile(name=filename, data=file_path.read_bytes()), None


@app.route("/")
def index():
    """Serve the main page."""
    return render_template("index.html")


@app.route("/api/upload", methods=["POST"])
def upload_file():
    """Handle PDF upload and return analysis."""
    cleanup_old_files()

    if "file" not in request.files:
        return jsonify({"error": "No file provided"}), 400

    file = request.files["file"]

    if file.filename == "":
        return jsonify({"error": "No file selected"}), 400

    if not is_pdf(file.filename):
        return jsonify({"error": "Only PDF files are allowed"}), 400

    file_id = str(uuid.uuid4())
    filename = secure_filename(file.filename)
    source = SourceFile(name=filename, data=file.read())

    analysis = PDFAnalyzer(source).analyze()
    if analysis.error:
        return jsonify({"error": analysis.error}), 400

    (upload_folder() / f"{file_id}_{filename}").write_bytes(source.data)
    app.logger.info("Stored upload %s (%s)", filename, format_size(source.size))

    return jsonify({
        "file_id": file_id,
        "filename": filename,
        "analysis": {
            **analysis.to_dict(),
            "file_size_formatted": format_size(analysis.file_size),
        },
    })


@app.route("/api/merge/files", methods=["GET"])
def list_merge_files():
    """List the session's merge queue."""
    return merge_queue_response(session_merge_queue())


@app.route("/api/merge/files", methods=["POST"])
def add_merge_files():
    """Append uploaded files to the merge queue in selection order."""
    cleanup_old_files()

    files = request.files.getlist("files")
    if not files:
        return jsonify({"error": "No file provided"}), 400

    rejected = [f.filename for f in files if not is_pdf(f.filename or "")]
    if rejected:
        return jsonify({"error": f"Only PDF files are allowed: {', '.join(rejected)}"}), 400

    queue = session_merge_queue()
    queue.add(*[
        SourceFile(name=secure_filename(f.filename), data=f.read())
        for f in files
    ])
    return merge_queue_response(queue)


@app.route("/api/merge/files/<int:index>", methods=["DELETE"])
def remove_merge_file(index: int):
    """Remove one file from the merge queue."""
    queue = session_merge_queue()
    try:
        queue.remove(index)
    except IndexError as e:
        return jsonify({"error": str(e)}), 404
    return merge_queue_response(queue)


@app.route("/api/merge/files", methods=["DELETE"])
def clear_merge_files():
    """Empty the merge queue."""
    queue = session_merge_queue()
    queue.clear()
    return merge_queue_response(queue)


@app.route("/api/merge", methods=["POST"])
def start_merge():
    """Start a merge job on a snapshot of the session's queue."""
    cleanup_old_files()
    queue = session_merge_queue()
    if not queue.can_merge:
        return jsonify({
            "error": f"Select at least {MergeQueue.MIN_FILES} PDF files to merge"
        }), 400

    job_id = job_manager.submit("merge", merge_pdfs, queue.snapshot())
    return jsonify({"job_id": job_id})


@app.route("/api/<path:tool>", methods=["POST"])
def start_file_job(tool: str):
    """Start a split, compress, extract-text or PDF word count job."""
    cleanup_old_files()
    pipeline = FILE_TOOLS.get(tool)
    if pipeline is None:
        return jsonify({"error": f"Unknown tool: {tool}"}), 404

    source, error = load_upload(request.get_json(silent=True))
    if error:
        return error

    job_id = job_manager.submit(tool, pipeline, source)
    return jsonify({"job_id": job_id})


@app.route("/api/stats", methods=["POST"])
def text_stats():
    """Count words, characters, sentences and paragraphs of posted text."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get("text", ""), str):
        return jsonify({"error": "Expected JSON body with a text field"}), 400

    return jsonify(run_stats(data.get("text", "")).to_dict())


@app.route("/api/job/<job_id>")
def get_job_status(job_id: str):
    """Get job status and progress."""
    job = job_manager.get(job_id)
    if job is None:
        return jsonify({"error": "Job not found"}), 404
    return jsonify(job)


@app.route("/api/download/<job_id>")
def download_file(job_id: str):
    """Send the job's output once, then release it."""
    job = job_manager.get(job_id)
    if job is None:
        return jsonify({"error": "Job not found"}), 404

    if job["status"] != "completed":
        return jsonify({"error": "Job not completed"}), 400

    artifact = job_manager.pop_artifact(job_id)
    if artifact is None:
        return jsonify({"error": "File no longer available"}), 404

    return send_file(
        io.BytesIO(artifact.data),
        mimetype=artifact.mimetype,
        as_attachment=True,
        download_name=artifact.filename,
    )


if __name__ == "__main__":
    print("Starting PDF Toolbox Web Server...")
    print("Open http://localhost:5000 in your browser")
    app.run(debug=True, host="0.0.0.0", port=5000)
