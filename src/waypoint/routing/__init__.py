"""Routing: routes, routers, the adapter protocols, and the trie engine.

Routes are registered during setup through a ``Router``; the shared
engine freezes its table when it starts serving.
"""
