"""Run a quick smoke request against the app.

Calls `/health` and, with `--users`, the first page of users through
FastAPI's TestClient, printing status and body.
"""

import argparse
import sys
import os

# Ensure backend folder is on sys.path so `requalify` package can be imported
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fastapi.testclient import TestClient  # noqa: E402
from requalify.main import app, USERS  # noqa: E402


def run(paths):
    client = TestClient(app)
    for path in paths:
        resp = client.get(path)
        print(path, 'STATUS:', resp.status_code, 'REQUEST-ID:', resp.headers.get('X-Request-ID'))
        if resp.headers.get('content-type', '').startswith('application/json'):
            print('JSON:', resp.json())
        else:
            print('CONTENT:', resp.text)


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--users', action='store_true', help='Also fetch the first page of users')
    args = parser.parse_args()
    run(['/health'] + ([USERS] if args.users else []))
