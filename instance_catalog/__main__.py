from instance_catalog.main import main

main()
