#!/usr/bin/env python
import sys
from pathlib import Path

import anyio

from linxcli import AsyncLinxClient


async def main() -> None:
    p = Path(__file__)
    async with AsyncLinxClient("https://linx.li") as client:
        ret = await client.upload(p.read_bytes(), p.name, barename_randomize=True)
        print(f"{ret.url = }")
        # ret.url = 'https://linx.li/w3ao5fkm.py'

        if "--save" not in sys.argv:
            await client.delete(ret.filename, ret.delete_key)


if __name__ == "__main__":
    anyio.run(main)
