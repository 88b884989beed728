#!/usr/bin/env python3
from __future__ import annotations

import argparse
import os

import uvicorn


def _set_env(name: str, value: str | None) -> None:
    if value is None:
        return
    clean = str(value).strip()
    if clean:
        os.environ[name] = clean


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the codespace backend.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--reload", action="store_true")
    parser.add_argument("--app", default="codespace.main:app")

    parser.add_argument("--storage-engine", choices=["memory", "mongo"], default=None)
    parser.add_argument("--mongodb-uri", default=None)
    parser.add_argument("--mongodb-db", default=None)
    parser.add_argument("--no-seed", action="store_true", help="Do not create the sample project on an empty store.")
    parser.add_argument("--llm-base-url", default=None)
    parser.add_argument("--llm-model", default=None)
    parser.add_argument("--execute-cwd", default=None)
    parser.add_argument("--execute-remote-url", default=None)
    parser.add_argument("--log-level", default=None)
    parser.add_argument("--app-version", default=None)

    args = parser.parse_args()

    _set_env("APP_STORAGE_ENGINE", args.storage_engine)
    _set_env("MONGODB_URI", args.mongodb_uri)
    _set_env("MONGODB_DB", args.mongodb_db)
    if args.no_seed:
        _set_env("SEED_DEFAULT_PROJECT", "false")
    _set_env("LLM_BASE_URL", args.llm_base_url)
    _set_env("LLM_MODEL", args.llm_model)
    _set_env("EXECUTE_DEFAULT_CWD", args.execute_cwd)
    _set_env("EXECUTE_REMOTE_URL", args.execute_remote_url)
    _set_env("LOG_LEVEL", args.log_level)
    _set_env("APP_VERSION", args.app_version)

    uvicorn.run(args.app, host=args.host, port=int(args.port), reload=bool(args.reload))


if __name__ == "__main__":
    main()
