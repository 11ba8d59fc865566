#!/usr/bin/env python3
"""
Smoke check for a running chat proxy.

Checks:
1. Health string and /health
2. Model listing
3. Chat completion (default model)
4. Streaming chat completion
5. OpenRouter routing (optional)

Usage:
    python smoke_check.py [--url http://localhost:3000] [--openrouter-model openrouter:openai/gpt-4o-mini]
"""

import argparse
import asyncio
import json
import sys

import httpx


async def check_health(url: str) -> bool:
    """Check / and /health."""
    print("\n=== Health ===")

    async with httpx.AsyncClient() as client:
        try:
            resp = await client.get(f"{url}/")
            resp.raise_for_status()
            print(f"Root: {resp.text}")

            resp = await client.get(f"{url}/health")
            resp.raise_for_status()
            data = resp.json()
            print(f"Status: {data.get('status')}")
            print(f"Model: {data.get('model')}")
            print(f"Search enabled: {data.get('search_enabled')}")
            return True
        except httpx.HTTPError as e:
            print(f"Health check failed: {e}")
            return False


async def check_models(url: str) -> bool:
    """Check /v1/models."""
    print("\n=== Models ===")

    async with httpx.AsyncClient() as client:
        try:
            resp = await client.get(f"{url}/v1/models")
            resp.raise_for_status()
            models = resp.json().get("data", [])
            print(f"Found {len(models)} models:")
            for m in models:
                print(f"  - {m.get('id')}")
            return bool(models)
        except httpx.HTTPError as e:
            print(f"Models check failed: {e}")
            return False


async def check_chat(url: str, model: str = None) -> bool:
    """Check a non-streaming chat completion."""
    print(f"\n=== Chat ({model or 'default model'}) ===")

    body = {"messages": [{"role": "user", "content": "What is the capital of France? Answer in one word."}]}
    if model:
        body["model"] = model

    async with httpx.AsyncClient(timeout=120.0) as client:
        try:
            resp = await client.post(f"{url}/v1/chat/completions", json=body)
            resp.raise_for_status()
            data = resp.json()
            content = data["choices"][0]["message"]["content"]
            print(f"Model: {data.get('model')}")
            print(f"Response: {content[:200]}")
            if model and data.get("model") != model:
                print(f"Expected model echo {model!r}")
                return False
            return True
        except (httpx.HTTPError, KeyError, IndexError) as e:
            print(f"Chat check failed: {e}")
            return False


async def check_streaming_chat(url: str) -> bool:
    """Check a streaming chat completion."""
    print("\n=== Streaming Chat ===")

    async with httpx.AsyncClient(timeout=120.0) as client:
        try:
            async with client.stream(
                "POST",
                f"{url}/v1/chat/completions",
                json={
                    "messages": [{"role": "user", "content": "Count from 1 to 5."}],
                    "stream": True,
                },
            ) as resp:
                resp.raise_for_status()

                content_parts = []
                async for line in resp.aiter_lines():
                    if not line.startswith("data: "):
                        continue
                    data_str = line[6:]
                    if data_str == "[DONE]":
                        break
                    delta = json.loads(data_str)["choices"][0]["delta"]
                    if delta.get("content"):
                        content_parts.append(delta["content"])
                        print(delta["content"], end="", flush=True)

                print()
                print(f"Total content chunks: {len(content_parts)}")
                return bool(content_parts)
        except (httpx.HTTPError, json.JSONDecodeError, KeyError) as e:
            print(f"Streaming check failed: {e}")
            return False


async def main():
    parser = argparse.ArgumentParser(description="Smoke check a running chat proxy")
    parser.add_argument("--url", default="http://localhost:3000", help="Proxy base URL")
    parser.add_argument("--openrouter-model", help="Also check an openrouter:-prefixed model")
    args = parser.parse_args()
    url = args.url.rstrip("/")

    print("=" * 60)
    print("Chat Proxy Smoke Check")
    print("=" * 60)
    print(f"Target: {url}")

    results = {}

    results["health"] = await check_health(url)

    if not results["health"]:
        print("\nProxy not running. Start with: python -m chatproxy.main")
        sys.exit(1)

    results["models"] = await check_models(url)
    results["chat"] = await check_chat(url)
    results["streaming"] = await check_streaming_chat(url)

    if args.openrouter_model:
        results["openrouter"] = await check_chat(url, args.openrouter_model)

    # Summary
    print("\n" + "=" * 60)
    print("Results:")
    print("=" * 60)
    for name, passed in results.items():
        status = "PASS" if passed else "FAIL"
        print(f"  {name}: {status}")

    all_passed = all(results.values())
    print("=" * 60)
    print(f"Overall: {'ALL PASSED' if all_passed else 'SOME FAILED'}")

    sys.exit(0 if all_passed else 1)


if __name__ == "__main__":
    asyncio.run(main())
