"""
qrshare

Short-link image sharing core: private image storage, opaque ids that can be
printed as QR codes, and short-lived signed access URLs minted per request.
"""

__version__ = "1.0.0"
