"""Describes the recipe planner domain. Centres around the `Plan`.

Why is this hard?

- Recipes come from a remote api that is slow, rate limited and can fail.
  Responses are cached in memory and on disk so repeat searches are free.
- Filling a plan means one api call per meal slot. Those run concurrently and
  the plan only changes once every call has come back.
- Shopping lists are derived from a plan, never edited into it.

The api and the database are injected, so both can be faked.
"""
