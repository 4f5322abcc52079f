# -*- coding: utf-8 -*-

class MjcfSceneError(Exception):
    """Base SDK error."""


class DescriptionError(MjcfSceneError):
    pass


class AssetError(MjcfSceneError):
    pass


class DecodeError(AssetError):
    pass


class JointError(MjcfSceneError):
    pass
