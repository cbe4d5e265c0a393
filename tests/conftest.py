"""Shared fixtures for the context tests."""
import logging
import threading
from http.server import BaseHTTPRequestHandler
from http.server import HTTPServer
from pathlib import Path

import pytest

from resourcescope.standalone_utilities.log_formats import PACKAGE_LOGGER
from resourcescope.standalone_utilities.log_formats import package_logger

SAMPLE_TEXT = 'hello world!'


class SampleFileHandler(BaseHTTPRequestHandler):
    def do_GET(self) -> None:
        payload = SAMPLE_TEXT.encode('utf-8')
        self.send_response(200)
        self.send_header('Content-Type', 'text/plain; charset=utf-8')
        self.send_header('Content-Length', str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def do_POST(self) -> None:
        length = int(self.headers.get('Content-Length', '0'))
        payload = self.rfile.read(length)
        self.send_response(201)
        self.send_header('Content-Type', 'application/octet-stream')
        self.send_header('Content-Length', str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format, *args) -> None:
        pass


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / 'samplefile.txt'
    path.write_text(SAMPLE_TEXT, encoding='utf-8')
    return path


@pytest.fixture
def sample_url():
    server = HTTPServer(('127.0.0.1', 0), SampleFileHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f'http://127.0.0.1:{server.server_address[1]}/samplefile.txt'
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture
def package_log(caplog):
    """`caplog` for records below the package logger, which does not propagate."""
    logger = package_logger()
    logger.addHandler(caplog.handler)
    caplog.set_level(logging.DEBUG, logger=PACKAGE_LOGGER)
    try:
        yield caplog
    finally:
        logger.removeHandler(caplog.handler)
