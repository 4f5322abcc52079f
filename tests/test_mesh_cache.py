import asyncio

import numpy as np
import pytest

from conftest import FakeDecoder, triangle
from mjcf_scene.api.diagnostics import DiagnosticLog
from mjcf_scene.assets import AssetResolver, MaxEntriesPolicy, MeshCache, NoEviction, SessionPolicy, resolve
from mjcf_scene.assets.cache import make_policy
from mjcf_scene.decoders.base import DecoderRegistry, MeshDecoder
from mjcf_scene.decoders.placeholder import is_placeholder

ASSETS = {
    "meshes/link.stl": "/data/meshes/link.stl",
    "meshes/broken.stl": "/data/meshes/broken.stl",
    "meshes/hand.glb": "/data/meshes/hand.glb",
    "meshes/cloud.xyz": "/data/meshes/cloud.xyz",
}


def _resolver(registry, cache=None, log=None):
    return AssetResolver(
        ASSETS,
        cache=cache if cache is not None else MeshCache(),
        decoders=registry,
        diagnostics=log if log is not None else DiagnosticLog(),
    )


def test_same_reference_decodes_once(registry, fake_decoder):
    resolver = _resolver(registry)

    async def run():
        return [await resolver.resolve("meshes/link.stl") for _ in range(5)]

    nodes = asyncio.run(run())
    assert fake_decoder.calls == ["/data/meshes/link.stl"]
    assert resolver.decode_count == 1
    assert len({id(n) for n in nodes}) == 5
    assert all(n.geometry is nodes[0].geometry for n in nodes)
    assert resolver.cache.stats.hits == 4


def test_scale_is_applied_after_clone_not_cached(registry):
    resolver = _resolver(registry)

    async def run():
        scaled = await resolver.resolve("meshes/link.stl", scale=(0.001, 0.001, 0.001))
        plain = await resolver.resolve("meshes/link.stl")
        return scaled, plain

    scaled, plain = asyncio.run(run())
    assert np.allclose(scaled.scale, [0.001, 0.001, 0.001])
    assert np.allclose(plain.scale, [1, 1, 1])


def test_composite_entries_are_deep_cloned(registry):
    resolver = _resolver(registry)

    async def run():
        return await resolver.resolve("meshes/hand.glb"), await resolver.resolve("meshes/hand.glb", scale=(2, 2, 2))

    first, second = asyncio.run(run())
    assert first is not second
    assert len(first.children) == len(second.children) == 2
    assert first.children[0] is not second.children[0]
    assert first.children[0].geometry is second.children[0].geometry
    assert np.allclose(first.scale, [1, 1, 1])
    assert np.allclose(second.scale, [2, 2, 2])
    assert resolver.decode_count == 1


def test_unresolved_reference_yields_placeholder(registry, fake_decoder):
    log = DiagnosticLog()
    resolver = _resolver(registry, log=log)
    node = asyncio.run(resolver.resolve("nowhere.stl"))
    assert is_placeholder(node)
    assert node.geometry is not None
    assert log.by_code("unresolved-asset")
    assert fake_decoder.calls == []


def test_decode_failure_is_not_cached():
    decoder = FakeDecoder(fail={"/data/meshes/broken.stl"})
    registry = DecoderRegistry()
    registry.register(decoder)
    log = DiagnosticLog()
    resolver = _resolver(registry, log=log)

    async def run():
        return await resolver.resolve("meshes/broken.stl"), await resolver.resolve("meshes/broken.stl")

    first, second = asyncio.run(run())
    assert is_placeholder(first) and is_placeholder(second)
    assert len(decoder.calls) == 2
    assert "meshes/broken.stl" not in resolver.cache
    assert len(log.by_code("decode-failed")) == 2



def test_decoder_returning_no_geometry_degrades_to_placeholder():
    class EmptyDecoder(MeshDecoder):
        extensions = ("stl",)

        async def decode(self, url):
            return None

    registry = DecoderRegistry()
    registry.register(EmptyDecoder())
    log = DiagnosticLog()
    resolver = _resolver(registry, log=log)
    node = asyncio.run(resolver.resolve("meshes/link.stl"))
    assert is_placeholder(node)
    assert "meshes/link.stl" not in resolver.cache
    assert resolver.decode_count == 0
    assert log.by_code("decode-failed")

def test_unsupported_extension(registry):
    log = DiagnosticLog()
    node = asyncio.run(_resolver(registry, log=log).resolve("meshes/cloud.xyz"))
    assert is_placeholder(node)
    assert log.by_code("unsupported-extension")


def test_module_level_resolve(registry, fake_decoder):
    cache = MeshCache()
    node = asyncio.run(resolve("link.stl", {"link.stl": "mem://link"}, cache=cache, decoders=registry))
    assert node.geometry.source == "mem://link"
    assert "link.stl" in cache


def test_max_entries_policy_is_lru():
    cache = MeshCache(MaxEntriesPolicy(2))
    cache.put("a", triangle())
    cache.put("b", triangle())
    assert cache.get("a") is not None
    cache.put("c", triangle())
    assert cache.keys() == ["a", "c"]
    assert cache.stats.evictions == 1


def test_session_policy_clears_on_new_session():
    cache = MeshCache(SessionPolicy())
    cache.put("a", triangle())
    cache.begin_session()
    assert len(cache) == 0

    keep = MeshCache(NoEviction())
    keep.put("a", triangle())
    keep.begin_session()
    assert "a" in keep


def test_instantiate_from_cache():
    cache = MeshCache()
    assert cache.instantiate("missing") is None
    cache.put("a", triangle())
    node = cache.instantiate("a", scale=(1, 2, 3))
    assert np.allclose(node.scale, [1, 2, 3])


def test_make_policy():
    assert isinstance(make_policy("none"), NoEviction)
    assert make_policy("max_entries", 3).max_entries == 3
    assert isinstance(make_policy("session"), SessionPolicy)
    with pytest.raises(ValueError):
        make_policy("forever")
    with pytest.raises(ValueError):
        MaxEntriesPolicy(0)
