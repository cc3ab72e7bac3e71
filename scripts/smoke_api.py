#!/usr/bin/env python3
"""Smoke check a running Git DSL API server against a local repository."""

import argparse
import json
import sys

import requests


def smoke_api(base_url: str, repo_path: str, base: str, head: str) -> int:
    """Fetch the snapshot, then every view of the first modified file."""
    print("🧪 Smoke testing Git DSL API...")
    print(f"Repository: {repo_path}")
    print(f"Revisions: {base[:8]} -> {head[:8]}")
    print()

    request = {"repo_path": repo_path, "base_sha": base, "head_sha": head}

    try:
        response = requests.post(f"{base_url}/snapshot", json=request, timeout=60)
        print(f"Status Code: {response.status_code}")
        result = response.json()

        if not result.get("ok"):
            error = result.get("error", {})
            print("❌ Error in response")
            print(f"Error Code: {error.get('code')}")
            print(f"Error Message: {error.get('message')}")
            return 1

        snapshot = result["data"]
        print("✅ Snapshot")
        print(f"Modified: {len(snapshot['modified_files'])}")
        print(f"Created: {len(snapshot['created_files'])}")
        print(f"Deleted: {len(snapshot['deleted_files'])}")
        print(f"Commits: {len(snapshot['commits'])}")

        if not snapshot["modified_files"]:
            print("ℹ️  No modified files to inspect")
            return 0

        filename = snapshot["modified_files"][0]
        for view in ("text", "structured", "patch", "json-diff"):
            response = requests.post(
                f"{base_url}/diff/file",
                json={**request, "filename": filename, "view": view},
                timeout=60,
            )
            result = response.json()
            marker = "✅" if result.get("ok") else "⚠️ "
            print(f"{marker} {view} view of {filename}")
            if result.get("ok"):
                print(json.dumps(result["data"]["result"], indent=2)[:500])
            else:
                print(f"   {result['error']['code']}: {result['error']['message']}")

        return 0

    except requests.exceptions.RequestException as e:
        print(f"❌ Request failed: {e}")
        return 1


def main() -> int:
    parser = argparse.ArgumentParser(description="Smoke check the Git DSL API")
    parser.add_argument("--url", default="http://127.0.0.1:8000")
    parser.add_argument("--repo", required=True, help="Absolute repository path")
    parser.add_argument("--base", required=True)
    parser.add_argument("--head", required=True)
    args = parser.parse_args()
    return smoke_api(args.url, args.repo, args.base, args.head)


if __name__ == "__main__":
    sys.exit(main())
