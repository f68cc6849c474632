from transfer_indexer.cli import run

if __name__ == "__main__":
    run()
