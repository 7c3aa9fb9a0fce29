from PyRFCorr.rfcorr import main

if __name__ == "__main__":
    main()
