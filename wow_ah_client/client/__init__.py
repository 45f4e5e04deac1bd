"""
Battle.net request pipeline.

Submodules:
  rate_limiter - shared sliding-window permit gate (one per API key)
  retry        - backoff schedule and retry ceiling
  errors       - transient / permanent failure taxonomy
  sanitize     - field-scoped pre-decode payload repair
  executor     - throttled fetch → repair → pydantic decode, with retries
  freshness    - skip/proceed gate for auction snapshots
  clustering   - collapse realms into connected-realm groups
  api_client   - the public client composing all of the above

Credential placement (.env, gitignored):
  BATTLE_NET_API_KEY  - community API key (name configurable via [api] api_key_env)
"""
