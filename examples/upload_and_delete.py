import sys
from pathlib import Path

from linxcli import LinxClient

p = Path(__file__).parent.parent / "README.md"
with LinxClient("https://linx.li") as client:
    ret = client.upload(p.read_bytes(), p.name, expires=3600)
    print(f"{ret.url = }")

    for k, v in client.info(ret.filename).items():
        print(f"{k}: {v}")

    if "--save" in sys.argv:
        print(f"Delete key: {ret.delete_key}")
        sys.exit()

    client.delete(ret.filename, ret.delete_key)
