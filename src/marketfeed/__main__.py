from marketfeed.main import main

main()
