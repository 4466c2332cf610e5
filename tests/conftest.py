"""
Pytest configuration for the relaykit test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Fresh settings for every test
- Temporary directories and sample projects for each toolchain
"""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

from relaykit.config import reset_settings
from relaykit.filesystem import LocalFileSystem
from relaykit.logging_config import setup_logging


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    os.environ.setdefault("RELAYKIT_MACHINE_MODE", "1")


@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    setup_logging(level="DEBUG", suppress_console=True, enable_file_logging=False, force=True)


@pytest.fixture(autouse=True)
def fresh_settings():
    reset_settings()
    yield
    reset_settings()


# ============================================================================
# TEMPORARY DIRECTORY FIXTURES
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that's cleaned up after the test."""
    tmp = Path(tempfile.mkdtemp(prefix="relaykit_test_"))
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def fs():
    return LocalFileSystem()


VITE_CONFIG = '''\
import { defineConfig } from "vite";
import react from "@vitejs/plugin-react";

// https://vitejs.dev/config/
export default defineConfig({
  plugins: [react()],
});
'''

VITE_MAIN = '''\
import React from "react";
import ReactDOM from "react-dom/client";
import App from "./App";

ReactDOM.createRoot(document.getElementById("root")!).render(
  <React.StrictMode>
    <App />
  </React.StrictMode>
);
'''

NEXT_CONFIG = '''\
/** @type {import('next').NextConfig} */
const nextConfig = {
  reactStrictMode: true,
};

module.exports = nextConfig;
'''

NEXT_APP = '''\
import "../styles/globals.css";

function MyApp({ Component, pageProps }) {
  return <Component {...pageProps} />;
}

export default MyApp;
'''

CRA_INDEX = '''\
import React from 'react';
import ReactDOM from 'react-dom';
import App from './App';

ReactDOM.render(<App />, document.getElementById('root'));
'''


def _write(root: Path, rel: str, content: str) -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def vite_project(temp_dir):
    """
    A Vite + TypeScript project.

    Returns:
        Path to the project root.
    """
    _write(temp_dir, "package.json", "{}\n")
    _write(temp_dir, "vite.config.ts", VITE_CONFIG)
    _write(temp_dir, "src/main.tsx", VITE_MAIN)
    yield temp_dir


@pytest.fixture
def next_project(temp_dir):
    """A Next.js project written in JavaScript."""
    _write(temp_dir, "package.json", "{}\n")
    _write(temp_dir, "next.config.js", NEXT_CONFIG)
    _write(temp_dir, "pages/_app.js", NEXT_APP)
    yield temp_dir


@pytest.fixture
def cra_project(temp_dir):
    """A Create React App project written in JavaScript."""
    _write(temp_dir, "package.json", "{}\n")
    _write(temp_dir, "src/index.js", CRA_INDEX)
    yield temp_dir
