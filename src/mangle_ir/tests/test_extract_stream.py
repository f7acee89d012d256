import contextlib
import json
import unittest
import warnings

from mangle_ir.diagnostics import CollectingSink
from mangle_ir.errors import IncompleteTrailingDataWarning
from mangle_ir.stream.extractor import aextract_objects, extract_objects


def _payload(tag: str) -> str:
    return json.dumps(
        {
            "guiding_questions": [f"What is near {tag}?"],
            "mangle_facts": [f"attraction_near_location(attraction_name, {tag})"],
            "mangle_rules": [],
        }
    )


class _TrackedSource:
    """Chunk iterator that records whether it was closed."""

    def __init__(self, chunks: list[str], fail_after: int | None = None) -> None:
        self.chunks = list(chunks)
        self.fail_after = fail_after
        self.pulled = 0
        self.closed = False

    def __iter__(self) -> "_TrackedSource":
        return self

    def __next__(self) -> str:
        if self.fail_after is not None and self.pulled >= self.fail_after:
            raise ConnectionError("upstream dropped")
        if self.pulled >= len(self.chunks):
            raise StopIteration
        chunk = self.chunks[self.pulled]
        self.pulled += 1
        return chunk

    def close(self) -> None:
        self.closed = True


class _AsyncTrackedSource:
    def __init__(self, chunks: list[str], fail_after: int | None = None) -> None:
        self.chunks = list(chunks)
        self.fail_after = fail_after
        self.pulled = 0
        self.closed = False

    def __aiter__(self) -> "_AsyncTrackedSource":
        return self

    async def __anext__(self) -> str:
        if self.fail_after is not None and self.pulled >= self.fail_after:
            raise ConnectionError("upstream dropped")
        if self.pulled >= len(self.chunks):
            raise StopAsyncIteration
        chunk = self.chunks[self.pulled]
        self.pulled += 1
        return chunk

    async def aclose(self) -> None:
        self.closed = True


def _split(text: str, size: int) -> list[str]:
    return [text[i : i + size] for i in range(0, len(text), size)]


class TestExtractObjects(unittest.TestCase):
    def test_yields_in_closing_order(self) -> None:
        text = _payload("Kloof Nek") + _payload("Camps Bay") + _payload("Sea Point")
        sink = CollectingSink()
        results = list(extract_objects(_split(text, 7), sink=sink))
        self.assertEqual(
            [r.guiding_questions[0] for r in results],
            ["What is near Kloof Nek?", "What is near Camps Bay?", "What is near Sea Point?"],
        )
        self.assertEqual(sink.diagnostics, [])

    def test_yields_before_stream_end(self) -> None:
        source = _TrackedSource([_payload("a"), '{"guiding_', "questions"])
        stream = extract_objects(source, sink=CollectingSink())
        first = next(stream)
        self.assertEqual(first.mangle_facts, ["attraction_near_location(attraction_name, a)"])
        self.assertEqual(source.pulled, 1)
        stream.close()
        self.assertTrue(source.closed)

    def test_plain_list_source(self) -> None:
        results = list(extract_objects([_payload("a")[:5], _payload("a")[5:]]))
        self.assertEqual(len(results), 1)

    def test_malformed_object_does_not_halt(self) -> None:
        sink = CollectingSink()
        chunks = ['{"guiding_questions": ', "[1, 2]}", _payload("b")]
        results = list(extract_objects(chunks, sink=sink))
        self.assertEqual(len(results), 1)
        self.assertEqual(len(sink.diagnostics), 1)

    def test_default_sink_logs(self) -> None:
        with self.assertLogs("mangle_ir.stream", level="ERROR") as logs:
            results = list(extract_objects(["{not json}", _payload("c")]))
        self.assertEqual(len(results), 1)
        self.assertEqual(len(logs.records), 1)

    def test_truncated_stream_keeps_prior_results(self) -> None:
        source = _TrackedSource(_split(_payload("a") + _payload("b")[:-10], 11))
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            results = list(extract_objects(source, sink=CollectingSink()))
        self.assertEqual(len(results), 1)
        self.assertEqual([w.category for w in caught], [IncompleteTrailingDataWarning])
        self.assertTrue(source.closed)

    def test_upstream_failure_releases_source(self) -> None:
        source = _TrackedSource([_payload("a"), _payload("b")], fail_after=1)
        stream = extract_objects(source, sink=CollectingSink())
        self.assertEqual(len(next(stream).mangle_facts), 1)
        with self.assertRaises(ConnectionError):
            next(stream)
        self.assertTrue(source.closed)

    def test_exhaustion_releases_source(self) -> None:
        source = _TrackedSource([_payload("a")])
        self.assertEqual(len(list(extract_objects(source))), 1)
        self.assertTrue(source.closed)


class TestAsyncExtractObjects(unittest.IsolatedAsyncioTestCase):
    async def test_yields_across_chunks(self) -> None:
        text = _payload("a") + "\n" + _payload("b")
        source = _AsyncTrackedSource(_split(text, 5))
        results = [obj async for obj in aextract_objects(source, sink=CollectingSink())]
        self.assertEqual(len(results), 2)
        self.assertTrue(source.closed)

    async def test_early_abandonment_releases_source(self) -> None:
        source = _AsyncTrackedSource([_payload("a"), _payload("b"), _payload("c")])
        async with contextlib.aclosing(aextract_objects(source, sink=CollectingSink())) as stream:
            async for obj in stream:
                self.assertEqual(obj.guiding_questions, ["What is near a?"])
                break
        self.assertTrue(source.closed)
        self.assertEqual(source.pulled, 1)

    async def test_upstream_failure_releases_source(self) -> None:
        source = _AsyncTrackedSource([_payload("a")], fail_after=1)
        results = []
        with self.assertRaises(ConnectionError):
            async for obj in aextract_objects(source, sink=CollectingSink()):
                results.append(obj)
        self.assertEqual(len(results), 1)
        self.assertTrue(source.closed)

    async def test_malformed_then_valid(self) -> None:
        sink = CollectingSink()
        source = _AsyncTrackedSource(["{\"guiding_questions\": [}", _payload("z")])
        results = [obj async for obj in aextract_objects(source, sink=sink)]
        self.assertEqual(len(results), 1)
        self.assertEqual(len(sink.errors), 1)


if __name__ == "__main__":
    unittest.main()
