if __name__ == '__main__':
    import sys
    from imformats.__main__ import main
    '''
    Convert an image from the repository root without installing:
        python main.py input.tif output.ome.tif
        python main.py --list-formats
    '''
    sys.exit(main())
