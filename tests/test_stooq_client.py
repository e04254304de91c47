import asyncio
import unittest

import httpx

from portfolio_api.errors import ProviderNoPriceError, ProviderShapeError, ProviderUnavailableError
from portfolio_api.integrations.stooq import StooqClient, parse_quote_csv, to_stooq_symbol
from portfolio_api.schemas.quote import QuoteSource

CSV_BODY = (
    "Symbol,Date,Time,Open,High,Low,Close,Volume\r\n"
    "AAPL.US,2024-01-05,22:00:09,181.99,182.76,180.17,181.185,62303331\r\n"
)


class ParseQuoteCsvTest(unittest.TestCase):
    def test_reads_close_and_open(self):
        quote = parse_quote_csv("aapl", CSV_BODY)

        self.assertEqual(quote.symbol, "AAPL")
        self.assertEqual(quote.price, 181.185)
        self.assertEqual(quote.change_percent, -0.44)
        self.assertEqual(quote.source, QuoteSource.FALLBACK_EQUITY)
        self.assertTrue(quote.timestamp.endswith("Z"))

    def test_header_lookup_is_case_insensitive_and_order_free(self):
        body = '"CLOSE" , open ,symbol\n"10.5","10",X.US\n'
        quote = parse_quote_csv("X", body)

        self.assertEqual(quote.price, 10.5)
        self.assertEqual(quote.change_percent, 5.0)

    def test_zero_open_has_no_change(self):
        quote = parse_quote_csv("X", "close,open\n10,0\n")
        self.assertEqual(quote.price, 10.0)
        self.assertIsNone(quote.change_percent)

    def test_fewer_than_two_lines_is_shape_error(self):
        for body in ("", "Symbol,Date,Time,Open,High,Low,Close,Volume\n", "\n\n"):
            with self.assertRaises(ProviderShapeError):
                parse_quote_csv("X", body)

    def test_not_available_close_raises_no_price(self):
        body = "Symbol,Date,Time,Open,High,Low,Close,Volume\nZZZZ.US,N/D,N/D,N/D,N/D,N/D,N/D,N/D\n"
        with self.assertRaises(ProviderNoPriceError):
            parse_quote_csv("ZZZZ", body)

    def test_missing_close_column_raises_no_price(self):
        with self.assertRaises(ProviderNoPriceError):
            parse_quote_csv("X", "open,volume\n1,2\n")


class StooqClientTest(unittest.TestCase):
    def test_symbol_convention(self):
        self.assertEqual(to_stooq_symbol("MSFT"), "msft.us")

    def test_fetch_quote_builds_csv_request(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text=CSV_BODY)

        client = StooqClient(base_url="https://stooq.test/q/l/", transport=httpx.MockTransport(handler))

        quote = asyncio.run(client.fetch_quote("AAPL"))

        self.assertEqual(quote.price, 181.185)
        params = seen[0].url.params
        self.assertEqual(params["s"], "aapl.us")
        self.assertEqual(params["f"], "sd2t2ohlcv")
        self.assertEqual(params["e"], "csv")
        self.assertIn("h", params)
        self.assertEqual(seen[0].url.query, b"s=aapl.us&f=sd2t2ohlcv&h&e=csv")

    def test_non_success_status_raises_unavailable(self):
        client = StooqClient(transport=httpx.MockTransport(lambda r: httpx.Response(503)))

        with self.assertRaises(ProviderUnavailableError) as ctx:
            asyncio.run(client.fetch_quote("AAPL"))
        self.assertEqual(ctx.exception.status_code, 503)


if __name__ == "__main__":
    unittest.main()
