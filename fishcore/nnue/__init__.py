"""NNUE evaluation: HalfKP features, network layers, accumulators and file format."""