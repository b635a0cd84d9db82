command = {"name": "bad", "run": None}
