"""Test doubles and builders shared by the test modules."""

import asyncio
import base64
import io

from PIL import Image

from snaptheplant.services.analysis import VisionAnalyzer


def make_data_uri(size=(128, 128), color=(90, 140, 70), image_format="PNG") -> str:
    """Encode a solid-color image as a data URI."""
    img = Image.new("RGB", size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format=image_format)
    mime = "image/png" if image_format == "PNG" else "image/jpeg"
    return f"data:{mime};base64,{base64.b64encode(buffer.getvalue()).decode('utf-8')}"


class FakeAnalyzer(VisionAnalyzer):
    """
    Analyzer returning scripted results.

    Each call takes the next scripted item, repeating the last one;
    exceptions are raised. With a gate set, calls wait for it before
    answering.
    """

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []
        self.gate = None

    @property
    def name(self) -> str:
        return "fake"

    async def analyze(self, image_data_uri, category):
        self.calls.append((image_data_uri, category))
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if self.gate is not None:
            await self.gate.wait()
        if isinstance(result, Exception):
            raise result
        return result


class SlowAnalyzer(VisionAnalyzer):
    """Analyzer that never answers in time."""

    @property
    def name(self) -> str:
        return "slow"

    async def analyze(self, image_data_uri, category):
        await asyncio.sleep(10)
