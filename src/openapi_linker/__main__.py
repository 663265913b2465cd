from openapi_linker.app import main

main()
