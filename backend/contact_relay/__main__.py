from contact_relay.main import run

run()
