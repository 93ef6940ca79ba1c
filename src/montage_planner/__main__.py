"""
Montage Planner - Entry point for python -m montage_planner
"""

if __name__ == "__main__":
    import logging
    import signal
    import sys

    # Default SIGPIPE behavior so piping JSON into `head` exits quietly
    if hasattr(signal, "SIGPIPE"):
        signal.signal(signal.SIGPIPE, signal.SIG_DFL)

    logging.raiseExceptions = False

    from montage_planner.cli import cli

    sys.exit(cli())
