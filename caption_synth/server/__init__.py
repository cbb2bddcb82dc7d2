"""HTTP API for building caption scripts.

WHY: Rendering workers and other services call the engine over HTTP
instead of importing it. The API is synchronous: a build is fast enough to
return in the response.
"""
