import asyncio
import unittest

import httpx

from portfolio_api.errors import ProviderShapeError, ProviderUnavailableError
from portfolio_api.integrations.coingecko import CoinGeckoClient
from portfolio_api.schemas.quote import QuoteSource
from portfolio_api.services.symbols import CRYPTO_ASSET_IDS


class CoinGeckoClientTest(unittest.TestCase):
    def _client(self, handler):
        return CoinGeckoClient(
            asset_ids=CRYPTO_ASSET_IDS,
            base_url="https://gecko.test/api/v3/simple/price",
            transport=httpx.MockTransport(handler),
        )

    def test_batch_request_and_one_entry_per_symbol(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"bitcoin": {"usd": 43250, "usd_24h_change": 1.2345}})

        rows = asyncio.run(self._client(handler).fetch_quotes(["BTC", "ETH"]))

        self.assertEqual(len(seen), 1)
        params = seen[0].url.params
        self.assertEqual(params["ids"], "bitcoin,ethereum")
        self.assertEqual(params["vs_currencies"], "usd")
        self.assertEqual(params["include_24hr_change"], "true")

        self.assertEqual(set(rows), {"BTC", "ETH"})
        btc = rows["BTC"]
        self.assertEqual(btc.symbol, "BTC")
        self.assertEqual(btc.price, 43250.0)
        self.assertEqual(btc.change_percent, 1.23)
        self.assertEqual(btc.source, QuoteSource.CRYPTO)
        self.assertIsNone(rows["ETH"])

    def test_missing_change_is_absent_and_price_keeps_precision(self):
        handler = lambda r: httpx.Response(200, json={"cardano": {"usd": 0.481234}})

        rows = asyncio.run(self._client(handler).fetch_quotes(["ADA"]))

        self.assertEqual(rows["ADA"].price, 0.481234)
        self.assertIsNone(rows["ADA"].change_percent)

    def test_non_numeric_price_is_unpriced(self):
        handler = lambda r: httpx.Response(200, json={"solana": {"usd": "98.1"}})

        rows = asyncio.run(self._client(handler).fetch_quotes(["SOL"]))

        self.assertIsNone(rows["SOL"])

    def test_empty_request_makes_no_network_call(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={})

        rows = asyncio.run(self._client(handler).fetch_quotes([]))

        self.assertEqual(rows, {})
        self.assertEqual(calls, [])

    def test_non_success_status_fails_batch(self):
        with self.assertRaises(ProviderUnavailableError):
            asyncio.run(self._client(lambda r: httpx.Response(429)).fetch_quotes(["BTC", "ETH"]))

    def test_non_object_payload_is_shape_error(self):
        with self.assertRaises(ProviderShapeError):
            asyncio.run(self._client(lambda r: httpx.Response(200, json=[1, 2])).fetch_quotes(["BTC"]))


if __name__ == "__main__":
    unittest.main()
