"""
Client-side state synchronization.

Responsibilities:
- Talk to the Store Rate HTTP API through an abstract gateway.
- Turn fast-changing search text into debounced, race-safe store fetches.
- Apply rating changes optimistically and roll them back on failure.
- Publish one immutable view state that the render layer subscribes to.
"""
