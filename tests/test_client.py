import unittest
from unittest import mock

import requests

from radixcrack.client import SearchClient


def _response(payload):
    r = mock.MagicMock()
    r.json.return_value = payload
    return r


class TestSearchClient(unittest.TestCase):
    def setUp(self):
        self.session = mock.MagicMock()
        self.session.headers = {}
        self.client = SearchClient("http://api.local/", session=self.session, timeout=5)

    def test_submit(self):
        self.session.post.return_value = _response({"job_id": "j1"})
        self.assertEqual(self.client.submit(323, width=10, scoring=None), "j1")
        self.session.post.assert_called_once_with(
            "http://api.local/api/search/submit", json={"N": "323", "width": 10}, timeout=5)

    def test_http_errors_raise(self):
        resp = _response({})
        resp.raise_for_status.side_effect = requests.HTTPError("400")
        self.session.get.return_value = resp
        with self.assertRaises(requests.HTTPError):
            self.client.status("j1")

    def test_wait_backs_off(self):
        self.session.get.side_effect = [
            _response({"status": "queued"}),
            _response({"status": "started"}),
            _response({"status": "finished", "result": {"status": "success"}}),
        ]
        delays = []
        info = self.client.wait("j1", poll_s=1.0, sleep=delays.append)
        self.assertEqual(info["status"], "finished")
        self.assertEqual(delays, [1.0, 2.0])

    def test_wait_deadline(self):
        self.session.get.return_value = _response({"status": "started"})
        with self.assertRaises(TimeoutError):
            self.client.wait("j1", deadline_s=0.5, poll_s=1.0, sleep=lambda s: None)


if __name__ == "__main__":
    unittest.main()
