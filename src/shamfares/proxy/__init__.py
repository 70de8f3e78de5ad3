"""Serverless-style HTTP proxy for the live search API."""

from shamfares.proxy.app import create_app

__all__ = ["create_app"]
