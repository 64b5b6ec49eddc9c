"""Collection ticker registry for the NFT launchpad."""

__version__ = "1.0.0"
