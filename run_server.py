#!/usr/bin/env python3
"""
ConceptGraph Uvicorn Server Launcher
====================================

Async server launcher using Uvicorn for the FastAPI application.
"""

import os
import sys
import importlib.util


def check_package_installed(package_name):
    """Check if a package is installed"""
    spec = importlib.util.find_spec(package_name)
    return spec is not None

def run_uvicorn():
    """Run ConceptGraph with Uvicorn (FastAPI async server)"""
    if not check_package_installed('uvicorn'):
        print("[ERROR] Uvicorn not installed. Install with: pip install uvicorn[standard]")
        sys.exit(1)

    # Ensure we're in the correct directory
    script_dir = os.path.dirname(os.path.abspath(__file__))
    os.chdir(script_dir)
    os.makedirs("logs", exist_ok=True)

    import uvicorn
    from config.settings import config

    host = config.HOST
    port = config.PORT
    debug = config.DEBUG
    log_level = config.LOG_LEVEL.lower()

    # Sessions live in process memory, so a single worker serves every request
    print("=" * 80)
    print(f"    ConceptGraph {config.VERSION}")
    print("=" * 80)
    print(f"Environment: {'development' if debug else 'production'} (DEBUG={debug})")
    print(f"Host: {host}")
    print(f"Port: {port}")
    print(f"Log Level: {log_level.upper()}")
    print(f"Auto-reload: {debug}")
    print(f"Server ready at: http://localhost:{port}")
    if debug:
        print(f"API Docs: http://localhost:{port}/docs")
    print("=" * 80)
    print("Press Ctrl+C to stop the server")
    print()

    try:
        uvicorn.run(
            "main:app",
            host=host,
            port=port,
            workers=1,
            reload=debug,
            log_level=log_level,
            log_config=None,  # main.py installs the unified formatter
            use_colors=False,
            timeout_graceful_shutdown=5,
            access_log=False,
        )
    except KeyboardInterrupt:
        print("\n" + "=" * 80)
        print("Shutting down gracefully...")
        print("=" * 80)

def main():
    """Main entry point"""
    run_uvicorn()

if __name__ == '__main__':
    main()
