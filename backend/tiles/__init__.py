"""
Vector tile decoding: thin adapters over mapbox-vector-tile.
"""
