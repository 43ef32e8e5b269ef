from appstore_gateway.main import run

run()
