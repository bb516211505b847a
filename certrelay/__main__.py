from certrelay.main import run

run()
