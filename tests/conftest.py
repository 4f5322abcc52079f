import numpy as np
import pytest

from mjcf_scene.api.errors import DecodeError
from mjcf_scene.decoders.base import DecoderRegistry, MeshDecoder, MeshPrimitive
from mjcf_scene.scene.node import NodeRole, SceneNode


def triangle(source=""):
    return MeshPrimitive(
        vertices=np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]),
        faces=np.array([[0, 1, 2]]),
        source=source,
    )


class FakeDecoder(MeshDecoder):
    """Records every decode; URLs listed in ``fail`` raise DecodeError."""

    extensions = ("stl", "obj")

    def __init__(self, fail=()):
        self.calls = []
        self.fail = set(fail)

    async def decode(self, url):
        self.calls.append(url)
        if url in self.fail:
            raise DecodeError(f"corrupt file: {url}")
        return triangle(url)


class CompositeDecoder(MeshDecoder):
    extensions = ("glb",)

    def __init__(self):
        self.calls = []

    async def decode(self, url):
        self.calls.append(url)
        root = SceneNode("scene", NodeRole.MESH_PART)
        for i in range(2):
            part = SceneNode(f"part{i}", NodeRole.MESH_PART, position=(0.0, 0.0, 0.1 * i))
            part.geometry = triangle(url)
            root.add(part)
        return root


@pytest.fixture
def fake_decoder():
    return FakeDecoder()


@pytest.fixture
def registry(fake_decoder):
    reg = DecoderRegistry()
    reg.register(fake_decoder)
    reg.register(CompositeDecoder())
    return reg
