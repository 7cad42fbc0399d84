from src.mht.cli import main

main()
