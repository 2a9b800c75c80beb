"""Client package for the Tropipay API.

Provides the authenticated request pipeline:
- ``token_manager``: OAuth2 client-credentials token lifecycle with single-flight refresh
- ``pipeline``: URL resolution, JSON transcoding, error mapping and the one-shot 401 retry
- ``tropipay_client``: The long-lived client object and its async context manager factory
"""
