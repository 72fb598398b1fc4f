"""
Integration tests for the build pipeline against a stand-in godotino-core.

A small shell script plays the part of the translator so that the real
subprocess, sketch directory and diagnostic code paths run end to end.

Run with: pytest --full tests/integration
"""

import os
import stat
import sys

import pytest

from godotino.build import BuildOrchestrator, BuildRequest, TranspileError
from godotino.config import Manifest, UserConfig

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(sys.platform == "win32", reason="uses a POSIX shell script"),
]

FAKE_CORE = """\
#!/bin/sh
# usage: fake-core <in.go> <out.cpp> --board <id>
if grep -q BROKEN "$1"; then
  echo "error[E001]: undefined function \\`Delay\\`" >&2
  echo "  --> $1:2:5" >&2
  echo "   |" >&2
  echo " 2 |     Delay(1000)" >&2
  echo "   |     ^^^^^ not found" >&2
  exit 1
fi
echo "warning: $(basename "$1") translated for $4" >&2
echo "// translated from $1" > "$2"
"""


@pytest.fixture
def fake_core(tmp_path):
    path = tmp_path / "bin" / "fake-core"
    path.parent.mkdir()
    path.write_text(FAKE_CORE)
    path.chmod(path.stat().st_mode | stat.S_IEXEC | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def project(tmp_path):
    project_dir = tmp_path / "robot"
    (project_dir / "src").mkdir(parents=True)
    (project_dir / "src" / "main.go").write_text("package main\n")
    (project_dir / "src" / "motor.go").write_text("package main\n")
    return project_dir


def test_translate_only_build(fake_core, project):
    orchestrator = BuildOrchestrator(UserConfig(core_binary=str(fake_core)))
    request = BuildRequest(project, Manifest(name="my robot", board="uno"))

    result = orchestrator.build(request)

    sketch_dir = project / "build" / "my_robot"
    assert result.sketch_dir == sketch_dir
    assert sorted(os.listdir(sketch_dir)) == ["main.cpp", "motor.cpp", "my_robot.ino"]
    assert result.warnings == [
        "warning: main.go translated for uno",
        "warning: motor.go translated for uno",
    ]

    # Second run over the existing directory gives the same result
    assert orchestrator.build(request) == result


def test_translation_failure_traceback(fake_core, project):
    broken = project / "src" / "main.go"
    broken.write_text("package main\nBROKEN\n")
    orchestrator = BuildOrchestrator(UserConfig(core_binary=str(fake_core)))

    with pytest.raises(TranspileError) as exc_info:
        orchestrator.build(BuildRequest(project, Manifest(name="robot")))

    tb = exc_info.value.traceback
    assert tb.message == "undefined function `Delay`"
    assert tb.frames[0].file == str(broken)
    assert tb.frames[0].line == 2
    assert tb.frames[0].code[0].text == "    Delay(1000)"
    assert tb.frames[0].code[0].is_pointer
    assert not (project / "build" / "robot" / "motor.cpp").exists()
