"""Root-level shim entry point for wifi-recon.

Allows running directly as:  python wifi-recon.py [args]
"""

if __name__ == "__main__":
    from wifi_recon.cli import main
    main()
