from authgateway.cli import main

raise SystemExit(main())
