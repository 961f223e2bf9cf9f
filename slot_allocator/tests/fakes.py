"""Sleep replacements for driving the simulation without real delays."""

import asyncio


async def instant_sleep(seconds: float) -> None:
    """
    Sub-second delays only yield to the loop; longer ones (the tick
    period in most tests) park until cancelled.
    """
    if seconds >= 1:
        await asyncio.Event().wait()
    await asyncio.sleep(0)


class GatedSleep:
    """Sleep replacement that blocks every caller until release()."""

    def __init__(self):
        self.gate = asyncio.Event()
        self.calls = 0

    async def __call__(self, seconds: float) -> None:
        self.calls += 1
        await self.gate.wait()

    def release(self) -> None:
        self.gate.set()
