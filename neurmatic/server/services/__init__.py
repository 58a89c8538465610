"""
Business services behind the API routers.

Services take a :class:`SqlRepoBundle` and raise :mod:`neurmatic.core.errors`
exceptions; routers obtain them through the dependencies in :mod:`.deps`.
"""
