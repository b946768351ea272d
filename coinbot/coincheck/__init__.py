"""Namespace for exchange API access; it holds no modules yet."""