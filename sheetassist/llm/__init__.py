"""Provider clients, prompt rendering and response parsing.

Three REST providers are supported, each described by a `ProviderSpec` record
in `providers/registry.py`:
- OpenAI Chat Completions
- Anthropic Messages (`claude`)
- Google Gemini Generative Language API (v1beta)

Nothing here touches the network; `sheetassist.gateway` issues the HTTP calls.
"""
