"""Bootstrap script that installs dependencies then launches RepoLauncher."""

from __future__ import annotations

import os
import platform
import subprocess
import sys

from pathlib import Path


ROOT = Path(__file__).resolve().parent.parent


def install_requirements() -> None:
    print("Installing Python requirements...")
    subprocess.check_call([sys.executable, "-m", "pip", "install", "--upgrade", "pip"])
    subprocess.check_call([sys.executable, "-m", "pip", "install", "-e", str(ROOT)])


def select_backend_env() -> dict[str, str]:
    env = os.environ.copy()
    if platform.system() == "Windows":
        env.setdefault("PYWEBVIEW_GUI", "edgechromium")
    return env


def main() -> None:
    try:
        install_requirements()
        env = select_backend_env()
        print("Launching RepoLauncher...")
        subprocess.run([sys.executable, str(ROOT / "repolauncher.py")], env=env, check=True, cwd=ROOT)
    except subprocess.CalledProcessError as exc:
        print(f"[ERROR] Setup script failed: {exc}", file=sys.stderr)
        sys.exit(exc.returncode)


if __name__ == "__main__":
    main()
