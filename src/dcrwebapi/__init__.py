"""
dcrwebapi: aggregation service for Decred voting-service, supply and price data.

Polls stakepool and vspd endpoints on a fixed interval, keeps the latest
known-good record per provider in memory and serves snapshots (plus lazily
cached aggregates such as coin supply and download counts) over HTTP.
"""

__version__ = "0.1.0"
