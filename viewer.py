"""
Launch the JSON viewer over runs recorded by main.py.
"""

import argparse

from royale.web.viewer_server import ViewerServer


def main():
    parser = argparse.ArgumentParser(description="Browse recorded battle royale runs")
    parser.add_argument("--port", "-p", type=int, default=5000)
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--runs-dir", default="runs", help="Directory written by main.py (default: runs)")
    args = parser.parse_args()

    ViewerServer(port=args.port, host=args.host, runs_dir=args.runs_dir).start()


if __name__ == "__main__":
    main()
