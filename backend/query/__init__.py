"""
Nearest-feature queries over vector tiles.

`submit_query` / `vtquery` are the public entry points; `run_query` is the
synchronous scan they run on a worker thread.
"""
