"""
wasm-strip Flask Server

Features:
- Single-request upload and strip
- Stripping summary in response headers
- Robust error handling and validation
"""

import os
import re
from io import BytesIO
from typing import Optional
from urllib.parse import quote

from flask import Flask, request, jsonify, send_file

from werkzeug.utils import secure_filename

from wasm_strip_py import __version__
from wasm_strip_py.formats.wasm import NotSupportedError
from wasm_strip_py.io.binary_stream import BinaryReaderError
from wasm_strip_py.strip.policy import RetentionPolicy, InvalidPatternError
from wasm_strip_py.strip.stripper import strip_module_with_report

app = Flask(__name__)

# Configuration
app.config['MAX_CONTENT_LENGTH'] = 100 * 1024 * 1024  # 100MB max upload

MAGIC_WASM = b'\x00asm'
TRUE_VALUES = {'1', 'true', 'yes', 'on'}


def sanitize_filename(filename: str) -> str:
    """Sanitize filename to prevent path traversal."""
    filename = secure_filename(filename)
    filename = re.sub(r'[^\w\-_\.]', '_', filename)
    if len(filename) > 255:
        name, ext = os.path.splitext(filename)
        filename = name[:250] + ext
    return filename or 'module.wasm'


def validate_file_magic(data: bytes) -> Optional[str]:
    """Check the magic bytes, returning an error message or None."""
    if len(data) < 8:
        return 'File too small'
    if data[:4] != MAGIC_WASM:
        return 'Not a WebAssembly binary'
    return None


def parse_flag(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in TRUE_VALUES


@app.route('/api/strip', methods=['POST'])
def api_strip():
    """Strip custom sections from an uploaded module."""
    if 'file' not in request.files:
        return jsonify({'error': 'No file uploaded'}), 400

    upload = request.files['file']
    filename = sanitize_filename(upload.filename or '')

    try:
        policy = RetentionPolicy(
            strip_all=parse_flag(request.form.get('all')),
            delete=request.form.getlist('delete'),
        )
    except InvalidPatternError as e:
        return jsonify({'error': str(e)}), 400

    data = upload.read()
    magic_error = validate_file_magic(data)
    if magic_error:
        return jsonify({'error': f'Invalid file: {magic_error}'}), 400

    try:
        result = strip_module_with_report(data, policy)
    except NotSupportedError as e:
        return jsonify({'error': str(e)}), 415
    except BinaryReaderError as e:
        return jsonify({'error': f'Malformed module: {e}', 'offset': e.offset}), 400

    app.logger.info(
        "stripped %s (%s mode): %d -> %d bytes, removed %d custom section(s)",
        filename, policy.mode, result.input_size, result.output_size, len(result.removed))

    response = send_file(
        BytesIO(result.data),
        mimetype='application/wasm',
        as_attachment=True,
        download_name=filename,
    )
    response.headers['X-Wasm-Strip-Removed'] = ','.join(quote(n, safe='') for n in result.removed)
    response.headers['X-Wasm-Strip-Kept'] = ','.join(quote(n, safe='') for n in result.kept)
    response.headers['X-Wasm-Strip-Saved'] = str(result.saved)
    return response


@app.route('/api/health')
def api_health():
    return jsonify({'status': 'ok', 'version': __version__})


@app.route('/api/docs')
def api_docs():
    """API documentation."""
    return jsonify({
        'name': 'wasm-strip API',
        'version': __version__,
        'endpoints': {
            'POST /api/strip': {
                'description': 'Strip custom sections from a WebAssembly module',
                'content_type': 'multipart/form-data',
                'fields': {
                    'file': 'module blob',
                    'all': 'remove every custom section (1/true/yes/on)',
                    'delete': 'regex of custom section names to remove (repeatable, searched anywhere in the name; an empty value matches every name)'
                },
                'response': 'stripped module (application/wasm)',
                'headers': ['X-Wasm-Strip-Removed', 'X-Wasm-Strip-Kept', 'X-Wasm-Strip-Saved']
            },
            'GET /api/health': {
                'description': 'Service status'
            }
        },
        'limits': {
            'max_upload_size': '100 MB'
        }
    })


@app.errorhandler(413)
def too_large(e):
    return jsonify({'error': 'File too large'}), 413


if __name__ == '__main__':
    print("=" * 60)
    print(f"wasm-strip Server v{__version__}")
    print("=" * 60)
    print("API Docs: http://localhost:5000/api/docs")
    print("=" * 60)

    app.run(host='0.0.0.0', port=5000, debug=False, threaded=True)
