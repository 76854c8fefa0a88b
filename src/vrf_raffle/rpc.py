from __future__ import annotations

import itertools
from typing import Any, Dict, List, Optional

import httpx


class OracleRpcClient:
    """JSON-RPC client for a remote randomness coordinator."""

    def __init__(
        self,
        rpc_url: str,
        address: str,
        timeout_s: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.address = address
        self.client = httpx.Client(timeout=timeout_s, transport=transport)
        self._ids = itertools.count(1)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "OracleRpcClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _post(self, method: str, params: List[Any]) -> Dict[str, Any]:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        resp = self.client.post(self.rpc_url, json=payload)
        resp.raise_for_status()
        data = resp.json()
        if "error" in data:
            raise RuntimeError(f"RPC error: {data['error']}")
        return data

    def request_random_words(
        self,
        key_hash: str,
        subscription_id: int,
        request_confirmations: int,
        callback_gas_limit: int,
        num_words: int,
        sender: str,
    ) -> int:
        """Submits a randomness request and returns its request id."""
        data = self._post(
            "vrf_requestRandomWords",
            [
                {
                    "coordinator": self.address,
                    "keyHash": key_hash,
                    "subId": subscription_id,
                    "minimumRequestConfirmations": request_confirmations,
                    "callbackGasLimit": callback_gas_limit,
                    "numWords": num_words,
                    "sender": sender,
                }
            ],
        )
        result = data.get("result")
        if result is None or "requestId" not in result:
            raise RuntimeError("vrf_requestRandomWords returned no requestId.")
        # Ids may come back hex-encoded.
        request_id = result["requestId"]
        if isinstance(request_id, str):
            return int(request_id, 0)
        return int(request_id)

