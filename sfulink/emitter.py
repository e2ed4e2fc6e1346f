import inspect
from pyee.asyncio import AsyncIOEventEmitter


class EnhancedEventEmitter(AsyncIOEventEmitter):
    def __init__(self, loop=None):
        super(EnhancedEventEmitter, self).__init__(loop=loop)

    # Call every listener of the event in registration order, awaiting
    # coroutine listeners, and collect the truthy results. A listener failure
    # propagates to the caller.
    async def emit_for_results(self, event, *args, **kwargs):
        results = []
        for f in self.listeners(event):
            result = f(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
            if result:
                results.append(result)
        return results
