from mdplay.main import run

run()
