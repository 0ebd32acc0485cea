"""
binkit - install prebuilt tool binaries from GitHub Releases.
"""
