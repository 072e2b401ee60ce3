#!/usr/bin/env python
"""
Run the Streamlit freight management screen.

Usage:
    python scripts/run_app.py
"""
import os
import subprocess
import sys
from pathlib import Path


def main():
    project_root = Path(__file__).parent.parent
    ui_path = project_root / 'src' / 'freight_rates' / 'ui' / 'app_streamlit.py'

    if not ui_path.exists():
        print(f"ERROR: UI module not found at {ui_path}")
        sys.exit(1)

    env = os.environ.copy()
    src_path = str(project_root / 'src')
    env['PYTHONPATH'] = os.pathsep.join(p for p in (src_path, env.get('PYTHONPATH')) if p)

    cmd = [sys.executable, '-m', 'streamlit', 'run', str(ui_path)]
    print(f"Starting Streamlit: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, cwd=str(project_root), env=env)
    except KeyboardInterrupt:
        print("\nApplication stopped.")


if __name__ == "__main__":
    main()
