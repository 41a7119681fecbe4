from gallery_api.main import run

run()
