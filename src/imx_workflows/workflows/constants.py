from __future__ import annotations

# 所有燒毀操作的接收地址。
BURN_ETH_ADDRESS = "0x0000000000000000000000000000000000000000"
