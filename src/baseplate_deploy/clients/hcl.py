"""
baseplate_deploy.clients.hcl

Local handling of HCL2 filesystem functions for Nomad job specs.

Nomad's `/v1/jobs/parse` endpoint parses HCL2 with filesystem functions
disabled. When a job is submitted with `allow_fs`, `file("...")` calls whose
argument is a plain string literal are read here, relative to the job spec's
directory, and replaced by an equivalent quoted HCL string before the spec is
sent to the server.
"""

from __future__ import annotations

import re
from pathlib import Path

# Comments and interpolation-free string literals are matched first and kept
# as written, so `file()` inside a comment and `//` inside a URL string are
# both left alone.
_FILE_CALL = re.compile(
    r'(?P<skip>#[^\n]*|//[^\n]*|/\*.*?\*/|"(?:[^"\\$\n]|\\.|\$(?!\{))*")'
    r'|\bfile\(\s*"(?P<path>(?:[^"\\$]|\\.)*)"\s*\)',
    re.DOTALL,
)
_ESCAPED = re.compile(r"\\(.)")


def quote_hcl_string(text: str) -> str:
    """Return `text` as a double-quoted HCL2 string literal."""

    out = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    # Template sequences must stay literal.
    out = out.replace("${", "$${").replace("%{", "%%{")
    return f'"{out}"'


def inline_file_functions(jobspec: str, *, workdir: Path) -> str:
    """
    Replace `file("path")` calls in `jobspec` with the referenced file contents.

    Relative paths resolve against `workdir`. A missing file raises
    FileNotFoundError. Calls with interpolated arguments, and calls inside
    `#`, `//` or `/* */` comments, are left untouched.
    """

    def _replace(match: re.Match[str]) -> str:
        if match.group("skip") is not None:
            return match.group(0)
        raw = _ESCAPED.sub(r"\1", match.group("path"))
        target = Path(raw)
        if not target.is_absolute():
            target = workdir / target
        return quote_hcl_string(target.read_text(encoding="utf-8"))

    return _FILE_CALL.sub(_replace, jobspec)
