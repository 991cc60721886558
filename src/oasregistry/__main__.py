from oasregistry.app import main

main()
